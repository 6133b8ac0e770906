# run_dev.py
"""
Local development launcher for FastAPI.
Equivalent to: `uvicorn formgen.app:app --reload --host 0.0.0.0 --port 8000`
Set USE_ECHO=1 to run without a Groq key or network access.
"""

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "formgen.app:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )

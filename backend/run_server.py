#!/usr/bin/env python3
"""
Convenience script to run the FastAPI server.
"""

import uvicorn
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

if __name__ == "__main__":
    from llama_chat.config import settings

    uvicorn.run(
        "llama_chat.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )

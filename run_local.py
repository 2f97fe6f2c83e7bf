#!/usr/bin/env python3
"""
Local development runner.
"""

import uvicorn


def main():
    """Run the application locally"""
    print("🚀 Starting Fitness Social Core API")
    print("📖 API docs will be available at: http://localhost:8000/docs (DEBUG=true)")
    print("-" * 50)

    uvicorn.run(
        "fitsocial.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )


if __name__ == "__main__":
    main()

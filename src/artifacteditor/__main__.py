"""
Run with: python -m artifacteditor
"""
from artifacteditor.main import main

if __name__ == "__main__":
    main()

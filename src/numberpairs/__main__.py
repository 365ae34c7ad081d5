"""
Run with: python -m numberpairs
"""
from numberpairs.main import main

if __name__ == "__main__":
    main()

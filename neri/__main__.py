"""
This allows neri to be run as a module with `python -m neri`.
"""
from .main import main

if __name__ == "__main__":
    main()

"""
Main entry point for the w3c_validate package.

Allows running the validator as: python -m w3c_validate
"""

from w3c_validate.cli import main

if __name__ == "__main__":
    main()

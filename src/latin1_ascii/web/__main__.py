"""Entry point: python -m latin1_ascii.web"""

from latin1_ascii.web.launcher import main

if __name__ == "__main__":
    main()

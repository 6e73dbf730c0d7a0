# main.py

from filespy.main import main

if __name__ == '__main__':
    # Same as `python -m filespy.main`, runnable straight from a checkout.
    main()

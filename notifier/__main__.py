"""Entry point for running the notifier module directly"""
from notifier.telegram_notifier import main

if __name__ == "__main__":
    main()

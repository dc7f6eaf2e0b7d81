"""
Launcher so the bot can be started with ``python main.py`` from a checkout.
"""
from kakuli.main import run_bot

if __name__ == "__main__":
    run_bot()

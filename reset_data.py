"""
reset_data.py
-------------
Utility script to clear all stored data (users, cars, rentals) from the data file.

This script is designed for development and testing purposes.
It empties the Store bound to DATA_PATH (default: data.pkl) and saves it back to disk.

Usage:
    $ python reset_data.py

After running this script, you can repopulate sample data by executing:
    $ python seeds.py
"""

from app.config import Config
from app.models.store import Store


def main():
    store = Store.configure(Config.DATA_PATH)
    store.clear()
    store.save()

    print(f"{store.path} has been cleared.")
    print("Tip: Run `python seeds.py` to regenerate demo data.")


if __name__ == "__main__":
    main()

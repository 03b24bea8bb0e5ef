#!/usr/bin/env python3
"""Clear all barter exchange data from the configured store for a fresh start."""

import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from barter_exchange.config import get_app_settings
from barter_exchange.store import clear_app_data, create_store


def clear_data():
    settings = get_app_settings()

    try:
        store = create_store(settings.store)
        removed = clear_app_data(store)
        print(f'Cleared {removed} keys from {settings.store.storage_type} store')
        print('Store cleared successfully!')

    except Exception as e:
        print(f'Error: {e}')
        sys.exit(1)


if __name__ == '__main__':
    clear_data()

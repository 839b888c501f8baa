"""Launcher script for the weather tool server.

Pass this file to the chat client::

    $ weather-bridge examples/weather_server.py
"""

from weather_bridge.server import main

if __name__ == "__main__":
    main()

"""
QRIS Microservice - launcher
Port: 33416 (QRIS_SERVICE_PORT)
"""

from qris_service.__main__ import main

if __name__ == '__main__':
    main()

"""
Бэк-офис отеля: номера, клиенты, бронирования и календарь занятости.
"""

__version__ = "0.1.0"

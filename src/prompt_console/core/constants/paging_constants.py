"""Constants for result paging."""

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 500
DEFAULT_PAGE_NO = 1

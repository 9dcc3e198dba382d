# config.py
# -*- coding: utf-8 -*-

"""
Configuration for the companywall.hr lookup pipeline
"""

BASE_URL = "https://www.companywall.hr"
SEARCH_URL = BASE_URL + "/pretraga"
DETAIL_PATH = "/tvrtka/"

# Public CORS relays, tried strictly in this order. "{url}" is the
# percent-encoded target URL.
PROXY_RELAYS = [
    "https://api.allorigins.win/raw?url={url}",
    "https://api.codetabs.com/v1/proxy?quest={url}",
    "https://corsproxy.io/?{url}",
]

REQUEST_TIMEOUT = 15
MIN_BODY_LENGTH = 100

STORE_DIR = ".companywall"
COMPANIES_COLLECTION = "companies"

CANDIDATE_MAX_LENGTH = 140
MAX_PHONES = 5
MIN_PHONE_DIGITS = 9
MAX_FINANCIAL_YEARS = 3

KNOWN_COMPANIES_ENABLED = False

LOG_DIR = "logs"

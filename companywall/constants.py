# constants.py
# -*- coding: utf-8 -*-

"""
Constants for the companywall lookup pipeline
"""

import re

SENTINEL = "-"

# Label words that appear on companywall.hr detail pages. A candidate value
# that carries two or more of them has swallowed a neighbouring label/value pair.
LABEL_WORDS = [
    "OIB",
    "MBS",
    "Adresa",
    "Sjedište",
    "Osnovano",
    "Djelatnost",
    "Veličina",
    "Rating",
    "Direktor",
    "Vlasnik",
    "Telefon",
    "Email",
    "Status",
]

NOISE_PATTERNS = [
    re.compile(r"kolačić|cookie", re.I),
    re.compile(r"prijav(a|i|ite)", re.I),
    re.compile(r"registr(acija|irajte)", re.I),
    re.compile(r"pretplat", re.I),
    re.compile(r"učitavanje|loading", re.I),
    re.compile(r"javascript", re.I),
    re.compile(r"©|sva prava", re.I),
    re.compile(r"više informacija|prikaži više|saznaj više", re.I),
    re.compile(r"premium|otključaj", re.I),
    re.compile(r"\{|\}|function\s*\(", re.I),
]

OIB_PATTERN = re.compile(r"OIB\s*[:.-]?\s*(\d{11})", re.I)
OIB_TOKEN_PATTERN = re.compile(r"(?<!\d)\d{11}(?!\d)")
MBS_PATTERN = re.compile(r"MBS\s*[:.-]?\s*(\d[\d .-]{3,12}\d)", re.I)
MBS_SHAPE = re.compile(r"^\d[\d\s.-]*$")
FOUNDED_PATTERN = re.compile(r"(?:Datum osnivanja|Osnovano)\s*[:.-]?\s*(\d{1,2}\.\s?\d{1,2}\.\s?\d{4}\.?|\d{4}\.?)", re.I)
SIZE_PATTERN = re.compile(r"Veličina(?: poduzeća)?\s*[:.-]?\s*((?:Mikro|Malo|Srednje|Veliko)\s*(?:poduzeće|poduzetništvo)?)", re.I)
RATING_SHAPE = re.compile(r"^(A|B|C|D|E)(\+{1,2}|-)?$")
RATING_PATTERN = re.compile(r"Rating\s*[:.-]?\s*((?:A|B|C|D|E)(?:\+{1,2}|-)?)(?![\w+-])")
EMAIL_PATTERN = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.I)
PHONE_PATTERN = re.compile(r"(?<![\w.,])(?:\+385\s?|00385\s?|0)\(?\d{1,2}\)?[\s/-]?\d{3,4}[\s-]?\d{3,4}(?![\d.,])")
IBAN_PATTERN = re.compile(r"HR\d{2}\s?(?:\d{4}\s?){4}\d{1}")
DATE_PATTERN = re.compile(r"\d{1,2}\.\s?\d{1,2}\.\s?\d{4}\.?")

STATUS_KEYWORDS = ["U likvidaciji", "U stečaju", "Neaktivan", "Brisan", "Aktivan"]

BLOCKADE_KEYWORDS = [
    re.compile(r"\bblokiran", re.I),
    re.compile(r"\bu blokadi\b", re.I),
    re.compile(r"\bblokada računa", re.I),
]

BLOCKADE_NEGATIONS = [
    re.compile(r"nije\s+u\s+blokadi", re.I),
    re.compile(r"nije\s+blokiran", re.I),
    re.compile(r"bez\s+blokade", re.I),
    re.compile(r"nema\s+blokad", re.I),
]

# CLI messages
MSG_SEARCHING = "Pretraga: {query} ({idx}/{total})"
MSG_NOT_FOUND = "❌ Nije pronađena tvrtka za upit: {query}"
MSG_FOUND = "✅ Pronađeno: {name} (OIB {oib})"
MSG_BATCH_COMPLETE = "✓ Završeno: {total} upita, pronađeno {found}."
MSG_BATCH_CANCELLED = "⚡ Prekinuto - obrađeno {completed}/{total} upita"
MSG_NO_EXCEL_DATA = "❌ U Excel datoteci nema upita za pretragu."
MSG_NO_DETAIL_INFO = "(Nema podataka)"

# Validation
MAX_QUERY_LENGTH = 200
MIN_QUERY_LENGTH = 1

# File operations
ALLOWED_EXCEL_EXTENSIONS = ['.xlsx']
MAX_FILE_SIZE_MB = 50

# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

import os
from sqlalchemy.types import TypeDecorator, Text
from cryptography.fernet import Fernet, MultiFernet, InvalidToken

# ✅ Optional: load from .env in dev
if os.getenv("ENV") != "production":
    from dotenv import load_dotenv
    load_dotenv()


def _load_cipher() -> MultiFernet:
    """
    Builds the journal cipher from FERNET_SECRET.

    The variable may hold several comma-separated keys; the first one
    encrypts, all of them decrypt, so keys can be rotated without
    re-writing stored journals first.
    """
    raw = os.getenv("FERNET_SECRET")
    if not raw:
        raise EnvironmentError("FERNET_SECRET is missing. Please set it in your environment or .env file.")

    try:
        return MultiFernet([Fernet(key.strip()) for key in raw.split(",") if key.strip()])
    except Exception as e:
        raise ValueError("FERNET_SECRET is invalid. Each key must be a 32-byte url-safe base64 string.") from e


cipher = _load_cipher()


def encrypt_journal(text: str) -> str:
    return cipher.encrypt(text.encode()).decode()


def decrypt_journal(token: str) -> str:
    try:
        return cipher.decrypt(token.encode()).decode()
    except InvalidToken as e:
        raise ValueError("Stored journal text could not be decrypted with the configured keys") from e


# 🔐 Journal text is only ever written to the database through this column type
class EncryptedJournalText(TypeDecorator):
    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None or value == "":
            return None
        return encrypt_journal(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return decrypt_journal(value)

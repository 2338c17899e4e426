#!/usr/bin/env python3
"""
Fill a Bookshelf database with sample genres and books.

The schema is created if needed.  Existing books and genres are
removed first (books before genres, because of the foreign key);
users are left alone.

Usage:
    python seed.py --db ./bookshelf.db

If --db is omitted, DATABASE_URL (or the default ``bookshelf.db``) is used.
"""

import argparse
import logging
import sqlite3

from bookshelf_api.app.core.config import Settings
from bookshelf_api.app.core.db import Database
from bookshelf_api.app.core.logging_config import setup_logging


logger = logging.getLogger("seed")

GENRES = [
    "Fiction",
    "Non-Fiction",
    "Science Fiction",
    "Fantasy",
    "Mystery",
    "Biography",
    "History",
    "Self-Help",
]

BOOKS = [
    ("To Kill a Mockingbird", "Harper Lee", "Fiction", "read"),
    ("Sapiens", "Yuval Noah Harari", "Non-Fiction", "to_read"),
    ("Dune", "Frank Herbert", "Science Fiction", "in_progress"),
    ("The Hobbit", "J.R.R. Tolkien", "Fantasy", "read"),
]


def seed(db: Database) -> None:
    db.init_db()
    with db.get_cursor() as cursor:
        cursor.execute("DELETE FROM books")
        cursor.execute("DELETE FROM genres")
        genre_ids = {}
        for name in GENRES:
            cursor.execute("INSERT INTO genres (name) VALUES (?)", (name,))
            genre_ids[name] = cursor.lastrowid
        logger.info("Inserted %d genres", len(genre_ids))
        for title, author, genre, status in BOOKS:
            cursor.execute(
                "INSERT INTO books (title, author, genre_id, status) VALUES (?, ?, ?, ?)",
                (title, author, genre_ids[genre], status),
            )
            logger.info("Added book: %s", title)


def main() -> None:
    ap = argparse.ArgumentParser(description="Seed the Bookshelf database with sample data.")
    ap.add_argument("--db", help="Path to SQLite DB file (defaults to DATABASE_URL)")
    args = ap.parse_args()

    setup_logging("INFO")
    db = Database(args.db or Settings().database_url)
    try:
        seed(db)
    except sqlite3.Error:
        logger.exception("Seeding %s failed", db.path)
        raise SystemExit(1)
    logger.info("Database %s seeded successfully", db.path)


if __name__ == "__main__":
    main()

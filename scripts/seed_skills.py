"""Insert the default skills into a database created without migrations.

Usage:
  python scripts/seed_skills.py
"""

import sys
import os

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from fitscore import create_app
from fitscore.extensions import db
from fitscore.models.skill import seed_skills


def main():
    app = create_app()
    with app.app_context():
        db.create_all()
        added = seed_skills()
        print(f'{added} skill(s) added')


if __name__ == '__main__':
    main()

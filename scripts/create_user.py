#!/usr/bin/env python3
"""
Script to create a new user interactively.

Runs the same validation as POST /api/v1/auth/register.

Usage:
    python scripts/create_user.py
    python scripts/create_user.py 905321234567 --email ali@example.com
"""

import argparse
import getpass
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from accounts.exceptions import ValidationError
from accounts.services import create_services


def main():
    parser = argparse.ArgumentParser(description="Create a new user")
    parser.add_argument("phone", nargs="?", help="Phone number (e.g., 905321234567)")
    parser.add_argument("--firstname", "-f", help="User's first name")
    parser.add_argument("--lastname", "-l", help="User's last name")
    parser.add_argument("--email", "-e", help="User's email")
    args = parser.parse_args()

    _, _, user_auth = create_services()

    phone = args.phone or input("Phone number (e.g., 905321234567): ").strip()
    firstname = args.firstname or input("First name: ").strip()
    lastname = args.lastname or input("Last name: ").strip()
    email = args.email or input("Email: ").strip()

    password = getpass.getpass("Enter password: ")
    confirm = getpass.getpass("Confirm password: ")

    if password != confirm:
        print("❌ Passwords do not match!")
        sys.exit(1)

    try:
        user = user_auth.register({
            "firstname": firstname,
            "lastname": lastname,
            "email": email,
            "phone_number": phone,
            "password": password,
        })
    except ValidationError as e:
        print("❌ Failed to create user:")
        for field, messages in e.errors.items():
            for message in messages:
                print(f"   {field}: {message}")
        sys.exit(1)

    print()
    print("✅ User created successfully!")
    print(f"   User ID: {user.user_id}")
    print(f"   Name: {user.firstname} {user.lastname}")
    print(f"   Email: {user.email}")
    print(f"   Phone: {user.phone_number}")


if __name__ == "__main__":
    main()

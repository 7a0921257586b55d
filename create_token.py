"""Issue a long-lived session token for manual testing.

Usage:
    python create_token.py <user_id> [base_user|organizer|administrator] [--days N]
"""
import argparse

from party_planner_api.app.core.security import issue_session_token
from party_planner_api.app.schemas.user import Role


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("user_id")
    parser.add_argument("role", nargs="?", default=Role.BASE_USER.value, choices=[role.value for role in Role])
    parser.add_argument("--days", type=int, default=365, help="token lifetime in days")
    args = parser.parse_args()
    print(issue_session_token(args.user_id, Role(args.role), expires_delta=args.days * 24 * 60 * 60))


if __name__ == "__main__":
    main()

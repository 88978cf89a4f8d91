# directory/management/commands/seed_demo_accounts.py
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from directory.exceptions import ApiError, SessionExpired
from directory.models import ROLE_HOSPITAL_OWNER, ROLE_SHOP_OWNER, ROLE_USER
from directory.services.api import ApiClient
from directory.services.auth import AuthAPI

DEMO_SET = [
    ("Demo User", "user@wellnessway.test", ROLE_USER),
    ("Demo Shop Owner", "shop@wellnessway.test", ROLE_SHOP_OWNER),
    ("Demo Hospital Owner", "hospital@wellnessway.test", ROLE_HOSPITAL_OWNER),
]


class Command(BaseCommand):
    help = "Ensure demo accounts exist on the directory API (idempotent: login, else register)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default=None, help="Password for every demo account (default: DEMO_PASSWORD).")

    def handle(self, *args, **opts):
        password = opts.get("password") or settings.DEMO_PASSWORD
        api = AuthAPI(ApiClient())
        for name, email, role in DEMO_SET:
            try:
                api.login({"email": email, "password": password})
            except SessionExpired:
                pass  # wrong password or unknown account: register below
            except ApiError as e:
                if e.status is None:
                    raise CommandError(f"directory API unreachable at {settings.API_URL}")
            else:
                self.stdout.write(self.style.SUCCESS(f"ok: {email} ({role}) exists"))
                continue
            try:
                api.register({"name": name, "email": email, "password": password, "role": role})
            except ApiError as e:
                raise CommandError(f"could not register {email}: {e.message_or(str(e.status))}")
            self.stdout.write(self.style.SUCCESS(f"ok: {email} ({role}) registered"))
        self.stdout.write(self.style.SUCCESS("All demo accounts ensured."))

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from rest_framework.authtoken.models import Token

from common.phone import is_valid_phone, normalize_phone
from profiles.models import Profile


class Command(BaseCommand):
    help = "Create or update an admin (staff) user that logs in with a phone number."

    def add_arguments(self, parser):
        parser.add_argument("--name", required=True)
        parser.add_argument("--phone", required=True)
        parser.add_argument("--password", required=True)

    def handle(self, *args, **options):
        phone = normalize_phone(options["phone"])
        if not is_valid_phone(phone):
            raise CommandError(f"Invalid phone number: {options['phone']}")

        User = get_user_model()
        u, created = User.objects.get_or_create(username=phone)
        if created:
            self.stdout.write(self.style.SUCCESS(f"Created user '{phone}'"))
        else:
            self.stdout.write(f"User '{phone}' already exists")

        # set (or reset) password and make sure the account is staff
        u.set_password(options["password"])
        u.first_name = options["name"]
        u.is_staff = True
        u.save()

        prof, _ = Profile.objects.get_or_create(
            user=u, defaults={"name": options["name"], "phone": phone}
        )
        if prof.name != options["name"]:
            prof.name = options["name"]
            prof.save(update_fields=["name"])

        token, _ = Token.objects.get_or_create(user=u)
        self.stdout.write(f"  → role=admin, token={token.key}")
        self.stdout.write(self.style.SUCCESS("Admin ready."))

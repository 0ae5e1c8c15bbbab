import time

from django.core.management.base import BaseCommand

from notifications.campaigns import process_due_retries


class Command(BaseCommand):
    help = "Run the delayed retry wave for broadcast recipients whose retry is due."

    def add_arguments(self, parser):
        parser.add_argument(
            "--loop",
            action="store_true",
            help="Keep sweeping every --interval seconds instead of exiting.",
        )
        parser.add_argument("--interval", type=int, default=60)

    def handle(self, *args, **options):
        while True:
            stats = process_due_retries()
            if stats["processed"]:
                self.stdout.write(self.style.SUCCESS(
                    f"Retried {stats['processed']} recipients: "
                    f"{stats['sent']} sent, {stats['failed']} failed"
                ))
            else:
                self.stdout.write("No retries due")

            if not options["loop"]:
                break
            time.sleep(options["interval"])

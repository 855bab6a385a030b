import time

from socketbolt import CommandHandler


class DeployCommand(CommandHandler):
    command = "/deploy"

    def handle(self):
        self.ack(f"Deploying {self.command_text}...")

        # Simulate deploy
        time.sleep(1)

        self.say(f"Deployed {self.command_text} successfully!")

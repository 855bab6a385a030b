import re

from socketbolt import EventHandler


class GreetingHandler(EventHandler):
    event_type = "message"
    pattern = re.compile(r"hello", re.IGNORECASE)

    def handle(self):
        self.say(f"Hey there <@{self.user}>! Welcome to socketbolt.")

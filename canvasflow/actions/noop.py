from .base import BaseAction


class NoopAction(BaseAction):
    """ Does nothing. The editor's placeholder for a freshly added action. """
    def execute(self, context, activation_inputs):
        return None

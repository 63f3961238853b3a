from logging import getLogger

from .base import BaseAction

logger = getLogger(__name__)


class _Fields(dict):
    # unknown {placeholders} are left in the message as written
    def __missing__(self, key):
        return "{" + key + "}"


class NotifyAction(BaseAction):
    """ Send a message to the host, or to the log when the host has no notify(). """

    def execute(self, context, activation_inputs):
        message = self.params.get("message", "")
        message = message.format_map(_Fields(count=len(activation_inputs), node=self.node_id))

        notify = getattr(context.host, "notify", None)
        if notify is not None:
            return notify(message)
        logger.info(message)
        return None

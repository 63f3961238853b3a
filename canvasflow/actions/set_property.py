from ..workflow.errors import ActionExecutionError
from .base import BaseAction


class SetPropertyAction(BaseAction):
    """ Set one property on every activating element through the host. """

    def execute(self, context, activation_inputs):
        name = self.require("name")
        value = self.params.get("value")

        host = context.host
        setter = getattr(host, "set_property", None)
        if setter is None:
            raise ActionExecutionError(self.node_id, "host does not provide set_property")

        elements = activation_inputs or context.selection
        for element in elements:
            setter(element, name, value)
        return True

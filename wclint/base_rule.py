class BaseRule:
    rule_id = None
    description = ""
    url = None
    messages = {}
    schema = []

    @property
    def meta(self):
        return {
            "docs": {"description": self.description, "url": self.url},
            "messages": dict(self.messages),
            "schema": list(self.schema),
        }

    def create(self, context):
        """
        Return a mapping of NodeKind -> callback. The engine calls each
        callback with every node of that kind, in traversal order.
        """
        raise NotImplementedError("create() must be implemented")

"""Policy for the sample order model."""
from pocometa.policy import AutoGeneratedKeyType, EntityPolicy


class NorthwindPolicy(EntityPolicy):
    def is_complex_type(self, type_):
        return type_.__name__ == "Address"

    def auto_generated_key_type(self, type_):
        if type_.__name__ in ("Order", "OrderDetail"):
            return AutoGeneratedKeyType.IDENTITY
        return None

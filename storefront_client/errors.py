"""
errors.py — Client-side Errors

Raised by the selection engine and the order submission pipeline. Transport
failures of the API client itself surface as httpx exceptions.
"""


class UnknownProductError(LookupError):
    """A product id that is not part of the current catalog."""

    def __init__(self, product_id):
        super().__init__(f"Product {product_id} is not in the catalog")
        self.product_id = product_id


class FormValidationError(ValueError):
    """The order form is incomplete or invalid. Nothing was sent to the server."""

    def __init__(self, fields):
        self.fields = list(fields)
        super().__init__(f"Invalid order fields: {', '.join(self.fields)}")


class SubmissionInProgress(RuntimeError):
    """A previous order submission has not finished yet."""


class OrderNotSavedError(RuntimeError):
    """
    The order may not have been saved. The selection and form are left as
    they were so the customer can try again.
    """

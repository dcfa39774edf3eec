from sfnmock.aws.api.stepfunctions import StepfunctionsApi


class StepFunctionsBackend(StepfunctionsApi):
    """
    The strategy the operation engine delegates to once a request passed validation. A backend implements the
    operations of ``StepfunctionsApi`` with the same signatures, and is chosen once, when the provider is built.
    """

    name: str = None

    def __repr__(self):
        return f"<{self.__class__.__name__} name={self.name}>"

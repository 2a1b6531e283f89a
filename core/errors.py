"""Domain exceptions for the classroom core."""


class ClassroomError(Exception):
    """Base class for classroom errors."""
    pass


class LearnerNotFound(ClassroomError, KeyError):
    """The learner id did not resolve in the store."""

    def __init__(self, learner_id: str):
        super().__init__(learner_id)
        self.learner_id = learner_id

    def __str__(self) -> str:
        return f"Learner not found: {self.learner_id}"


class TaskNotFound(ClassroomError, KeyError):
    """The task id is not in the catalog."""

    def __init__(self, task_id: str):
        super().__init__(task_id)
        self.task_id = task_id

    def __str__(self) -> str:
        return f"Task not found: {self.task_id}"


class GatewayUnavailable(ClassroomError):
    """Quiz generation failed. Recovered locally with the fallback quiz."""
    pass


class InvalidQuizState(ClassroomError, ValueError):
    """A quiz cannot be scored (no questions, or no such pending quiz)."""
    pass


class QuizNotFound(InvalidQuizState):
    """No pending quiz with this id for this learner (unknown, expired or already submitted)."""
    pass


class PollClosed(ClassroomError):
    """No poll is currently accepting votes."""
    pass


class InvalidVote(ClassroomError, ValueError):
    """Bad poll definition or vote."""
    pass


class InvalidClassCode(ClassroomError, ValueError):
    """Class code rejected on join."""
    pass

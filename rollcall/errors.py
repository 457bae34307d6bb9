"""Exception hierarchy for the reconciliation pipeline."""


class RollcallError(Exception):
    """Base class for all rollcall errors."""

    pass


class InputValidationError(RollcallError):
    """Required inputs are missing before a run starts."""

    pass


class ExtractionError(RollcallError):
    """Error while extracting names from a source."""

    pass


class RosterExtractionError(ExtractionError):
    """The roster source produced no usable candidate names."""

    pass


class OracleError(RollcallError):
    """Error talking to the extraction/matching backend."""

    pass


class LLMChainError(OracleError):
    """Error during LLM chain execution."""

    pass


class OracleContractError(OracleError):
    """The matching response does not have the agreed shape."""

    pass


class WorkflowError(RollcallError):
    """An operation was used outside the state that allows it."""

    pass


class InvalidTransitionError(WorkflowError):
    """The workflow is not in a phase that accepts this operation."""

    pass


class AnalysisInProgressError(WorkflowError):
    """Another analysis run is still in flight."""

    pass


class InvalidIndexError(WorkflowError, IndexError):
    """Index does not point into the present bucket."""

    pass


class NoActiveSessionError(WorkflowError):
    """There is no review session to operate on."""

    pass


class NoPendingChangeError(WorkflowError):
    """A bulk change was confirmed without being staged first."""

    pass

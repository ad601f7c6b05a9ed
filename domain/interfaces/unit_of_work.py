from typing_extensions import Protocol


class UnitOfWork(Protocol):
    """
    Transaction boundary shared by the repositories of one request.

    Everything written through the repositories since the last commit is
    committed or discarded together.
    """

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...

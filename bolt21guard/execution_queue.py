import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional

from loguru import logger


class ExecutionQueue:
    """
    Runs queued actions one at a time, in order.
    Payments go through here so that an evaluate-then-record sequence
    never interleaves with another one against the same tracker.
    """

    def __init__(self):
        # created in start() so it belongs to the running loop
        self.queue: Optional[asyncio.Queue[Dict[str, Any]]] = None
        self.task: Optional[asyncio.Task] = None

    def start(self):
        if self.queue is None:
            self.queue = asyncio.Queue()
        if self.task is None or self.task.done():
            self.task = asyncio.create_task(self.run())

    async def stop(self):
        """
        Cancel the worker. The action in flight sees a CancelledError,
        its caller and the callers of everything still queued get one too.
        """
        if self.task:
            self.task.cancel()
            try:
                await self.task
            except asyncio.CancelledError:
                pass
            self.task = None
        if self.queue is not None:
            while not self.queue.empty():
                future = self.queue.get_nowait().get("future")
                if future and not future.done():
                    future.cancel()
            self.queue = None

    async def enqueue(self, action: Callable[[], Awaitable[Any]]) -> Any:
        self.start()
        future = asyncio.get_running_loop().create_future()
        self.queue.put_nowait({"action": action, "future": future})
        return await future

    async def run(self):
        while True:
            try:
                task = await self.queue.get()
                action = task.get("action")
                future = task.get("future")
                try:
                    if not action:
                        raise Exception("Invalid action")
                    res = await action()
                    if future and not future.done():
                        future.set_result(res)
                except asyncio.CancelledError:
                    if future and not future.done():
                        future.cancel()
                    raise
                except Exception as e:
                    if future and not future.done():
                        future.set_exception(e)
            except Exception as e:
                logger.error(str(e))

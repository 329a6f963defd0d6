"""Looking at a slice of the rows.

Printing the first rows of a dataset, or the
top 5 after sorting, only needs a slice of the data.
"""

from .base import QueryPlanNode


class SliceNode(QueryPlanNode):
    """Emit only ``length`` rows starting at ``offset``.

    Once enough rows were emitted the child is not consumed
    anymore, so taking the head of a large CSV file
    doesn't need to read the whole file.

    >>> import pyarrow as pa
    >>> from dataidioms.compute import TableDataSource
    >>> data = pa.record_batch({"hwy": [29, 31, 35, 12]})
    >>> next(SliceNode(1, 2, TableDataSource(data)).batches()).column("hwy").to_pylist()
    [31, 35]
    """

    def __init__(self, offset: int, length: int, child: QueryPlanNode) -> None:
        """
        :param offset: Index of the first row to emit, the first row is 0.
        :param length: How many rows to emit.
        :param child: The node from which to consume the rows.
        """
        if offset < 0 or length < 0:
            raise ValueError("offset and length must not be negative")
        self.offset = offset
        self.length = length
        self.child = child

    def __str__(self) -> str:
        return f"SliceNode({self.offset}:{self.offset + self.length}, {self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        seen_rows = 0
        end = self.offset + self.length
        emitted = False
        last_batch = None

        batches_generator = self.child.batches()
        for batch in batches_generator:
            batch_start, batch_end = seen_rows, seen_rows + batch.num_rows
            seen_rows = batch_end
            if batch_end <= self.offset:
                last_batch = batch
                continue

            start_in_batch = max(0, self.offset - batch_start)
            stop_in_batch = min(batch.num_rows, end - batch_start)
            if stop_in_batch > start_in_batch or not emitted:
                yield batch.slice(start_in_batch, max(0, stop_in_batch - start_in_batch))
                emitted = True
            if seen_rows >= end:
                batches_generator.close()
                break
        else:
            if not emitted and last_batch is not None:
                # The offset is past the end of the data,
                # emit an empty batch so the columns are known.
                yield last_batch.slice(0, 0)

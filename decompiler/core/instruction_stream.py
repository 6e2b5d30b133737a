from collections import Counter
from itertools import islice
from typing import Iterable, Iterator, List, Optional, Union

from decompiler.core.instruction import Instruction


class InstructionStream:
    """
    Ordered sequence of instructions as produced by a disassembler.

    Instructions are appended while the stream is built and the order is kept
    as is. Analysis passes walk the stream forward for linear decoding and
    backward for backpatching, so both directions are supported from any
    position.
    """

    def __init__(self, instructions: Optional[Iterable[Instruction]] = None):
        self._instructions: List[Instruction] = []
        if instructions is not None:
            self.extend(instructions)

    def append(self, instruction: Instruction) -> None:
        self._instructions.append(instruction)

    def extend(self, instructions: Iterable[Instruction]) -> None:
        for instruction in instructions:
            self.append(instruction)

    def __len__(self) -> int:
        return len(self._instructions)

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self._instructions)

    def __reversed__(self) -> Iterator[Instruction]:
        return reversed(self._instructions)

    def __getitem__(self, index: Union[int, slice]) -> Union[Instruction, "InstructionStream"]:
        if isinstance(index, slice):
            return InstructionStream(self._instructions[index])
        return self._instructions[index]

    def __contains__(self, instruction: object) -> bool:
        return instruction in self._instructions

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InstructionStream):
            return NotImplemented
        return self._instructions == other._instructions

    def __repr__(self) -> str:
        return f"InstructionStream(instructions={len(self._instructions)})"

    def _normalize(self, index: int) -> int:
        if index < 0:
            index += len(self._instructions)
        if not 0 <= index < len(self._instructions):
            raise IndexError(f"Instruction index {index} out of range")
        return index

    def iter_from(self, index: int) -> Iterator[Instruction]:
        """Iterate forward starting at (and including) position `index`."""
        return islice(self._instructions, self._normalize(index), None)

    def iter_reversed_from(self, index: int) -> Iterator[Instruction]:
        """Iterate backward starting at (and including) position `index`."""
        start = self._normalize(index)
        return (self._instructions[position] for position in range(start, -1, -1))

    def index_of_address(self, address: int) -> Optional[int]:
        """Position of the first instruction at `address`, or None."""
        for position, instruction in enumerate(self._instructions):
            if instruction.address == address:
                return position
        return None

    def find(self, address: int) -> Optional[Instruction]:
        """First instruction at `address`, or None."""
        position = self.index_of_address(address)
        return None if position is None else self._instructions[position]

    def addresses(self) -> List[int]:
        return [instruction.address for instruction in self._instructions]

    def duplicate_addresses(self) -> List[int]:
        """
        Addresses shared by more than one instruction, in ascending order.

        A linear disassembly never produces duplicates, but this is reported
        rather than enforced.
        """
        counts = Counter(self.addresses())
        return sorted(address for address, count in counts.items() if count > 1)

    def has_unique_addresses(self) -> bool:
        return not self.duplicate_addresses()

    def total_stack_change(self) -> int:
        return sum(instruction.stack_change for instruction in self._instructions)

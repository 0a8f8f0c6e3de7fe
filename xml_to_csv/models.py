"""
Core data models for the XML to CSV extraction system.

This module defines the primary data structures used throughout the system:
the field catalog that drives extraction, and the per-document work items and
results produced by the aggregator.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple


# Reserved catalog key whose value names the record boundary element
BOUNDARY_SENTINEL = "parser_open_block_tag"

DEFAULT_BOUNDARY_ELEMENT = "ESADout_CUGoods"

# (source element, output column) in output column order
DEFAULT_FIELD_MAPPINGS: Tuple[Tuple[str, str], ...] = (
    ("GoodsNumeric", "Номер"),
    ("GoodsDescription", "Название"),
    ("GrossWeightQuantity", "Вес брутто(кг)"),
    ("InvoicedCost", "Цена товара"),
    ("ContractCurrencyCode", "Валюта"),
    ("ContractCurrencyRate", "Курс"),
    ("CustomsCost", "Таможенная стоимость"),
    ("Manufacturer", "Производитель"),
    ("GoodsModel", "Модель"),
    ("TradeMark", "Торговая марка"),
    ("GoodsQuantity", "Количество"),
    ("MeasureUnitQualifierName", "Единица измерения"),
    ("Code", "Код товара"),
    ("PrDocumentNumber", "Инвойс"),
)

Record = Dict[str, str]


@dataclass(frozen=True)
class FieldCatalog:
    """
    Resolved column order plus source-element-to-column mappings.

    The catalog keeps two separate structures: an ordered tuple of output
    column names and a mapping used for name resolution. Output order is
    always taken from ``column_order``, never from mapping iteration.

    Instances are immutable and are shared by every extraction worker
    without locking.

    Attributes:
        column_order: Unique output column names in header order
        source_to_column: Source element name -> output column name, including
                          the BOUNDARY_SENTINEL entry naming the boundary element
    """
    column_order: Tuple[str, ...]
    source_to_column: Mapping[str, str]

    def __post_init__(self):
        """Validate catalog invariants and freeze the mapping."""
        if BOUNDARY_SENTINEL not in self.source_to_column:
            raise ValueError(f"source_to_column must contain the '{BOUNDARY_SENTINEL}' entry")
        if not self.source_to_column[BOUNDARY_SENTINEL]:
            raise ValueError("boundary element name cannot be empty")
        if len(set(self.column_order)) != len(self.column_order):
            raise ValueError("column_order cannot contain duplicates")
        # frozen dataclass: bypass __setattr__ to store read-only views
        object.__setattr__(self, 'column_order', tuple(self.column_order))
        object.__setattr__(self, 'source_to_column', MappingProxyType(dict(self.source_to_column)))

    @property
    def boundary_element(self) -> str:
        """Element name marking the start of one record."""
        return self.source_to_column[BOUNDARY_SENTINEL]

    def field_mappings(self) -> List[Tuple[str, str]]:
        """Return (source element, column) pairs, excluding the boundary entry."""
        return [
            (source_name, column_name)
            for source_name, column_name in self.source_to_column.items()
            if source_name != BOUNDARY_SENTINEL
        ]

    @classmethod
    def default(cls) -> 'FieldCatalog':
        """Build the built-in customs declaration catalog."""
        return cls.from_overrides(())

    @classmethod
    def from_overrides(cls, overrides: Iterable[Tuple[str, str]],
                       base: Optional['FieldCatalog'] = None) -> 'FieldCatalog':
        """
        Merge override entries into a base catalog (the built-in default if omitted).

        Each override replaces or adds a source mapping. A column name not yet in
        the column order is appended, so first-seen order is preserved. The
        boundary entry only changes the boundary element and never adds a column.

        Args:
            overrides: Iterable of (source element, column name) pairs, applied in order
            base: Catalog to start from

        Returns:
            New FieldCatalog with the overrides applied
        """
        if base is None:
            column_order = [column for _, column in DEFAULT_FIELD_MAPPINGS]
            source_to_column = {BOUNDARY_SENTINEL: DEFAULT_BOUNDARY_ELEMENT}
            source_to_column.update(DEFAULT_FIELD_MAPPINGS)
        else:
            column_order = list(base.column_order)
            source_to_column = dict(base.source_to_column)

        for source_name, column_name in overrides:
            source_to_column[source_name] = column_name
            if source_name == BOUNDARY_SENTINEL:
                continue
            if column_name not in column_order:
                column_order.append(column_name)

        return cls(column_order=tuple(column_order), source_to_column=source_to_column)


@dataclass
class WorkItem:
    """Work item for the parallel extraction pool."""
    sequence: int
    path: str


@dataclass
class WorkResult:
    """Result from extracting one document."""
    sequence: int
    path: str
    success: bool
    records_extracted: int = 0
    merged: bool = False  # records accepted by the RecordSet
    error_stage: Optional[str] = None
    error_message: Optional[str] = None
    processing_time: float = 0.0


@dataclass
class AggregationResult:
    """
    Results from one aggregation run.

    Attributes:
        records: Every record merged before the run finished or hit its deadline
        timed_out: True if the deadline elapsed before all documents completed
        files_total: Number of documents submitted
        work_results: Results of the documents that completed before the deadline
        processing_time_seconds: Wall-clock duration of the run
    """
    records: List[Record] = field(default_factory=list)
    timed_out: bool = False
    files_total: int = 0
    work_results: List[WorkResult] = field(default_factory=list)
    processing_time_seconds: float = 0.0

    @property
    def files_completed(self) -> int:
        """Number of documents whose task finished before the deadline."""
        return len(self.work_results)

    @property
    def files_failed(self) -> int:
        """Number of completed documents that could not be extracted."""
        return sum(1 for r in self.work_results if not r.success)

    @property
    def files_merged(self) -> int:
        """Number of completed documents whose records made it into the result."""
        return sum(1 for r in self.work_results if r.merged)

    @property
    def has_records(self) -> bool:
        """True if at least one record was merged."""
        return bool(self.records)

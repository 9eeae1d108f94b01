from .builders import Query as Query, PIPE_SEPARATOR as PIPE_SEPARATOR
from .protocols import StageProtocol as StageProtocol
from .values import TypeValue as TypeValue
from .stages import (
    Stage as Stage,
    From as From,
    Range as Range,
    Filter as Filter,
    Group as Group,
    Yield as Yield,
    Keep as Keep,
    Drop as Drop,
    Tail as Tail,
    Contains as Contains,
    Distinct as Distinct,
    Max as Max,
    Min as Min,
    Limit as Limit,
    Set as Set,
    Sort as Sort,
    Count as Count,
    Buckets as Buckets,
    Integral as Integral,
    Duplicate as Duplicate,
    Keys as Keys,
    Pivot as Pivot,
)

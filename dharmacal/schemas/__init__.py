from .panchanga import (
    AyanamsaInfo,
    KaranaInfo,
    Location,
    LocationConfig,
    MaasInfo,
    NakshatraInfo,
    PanchangaSnapshot,
    SankrantiInfo,
    SnapshotMeta,
    TithiInfo,
    YogaInfo,
)

from .recurrence import (
    CalendarEvent,
    DateWindow,
    DayAttributes,
    EventRule,
    ExplicitSolarRule,
    ExplicitTithiRule,
    GeneratedOccurrence,
    GenerationResult,
    MonthlyLunarRule,
    MonthlySolarRule,
    NoneRule,
    RecommendedWindow,
    RecurrenceOptions,
    YearlyLunarRule,
    YearlySolarRule,
)

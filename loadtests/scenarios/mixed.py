"""Mixed requisition workload scenario.

Combines the requisition and suggestion journeys with weights that model
a working day in a restaurant group's central store. This is the
recommended scenario for load baseline testing.
"""

from locust import HttpUser, between

from loadtests.scenarios.requisitions import (
    QuantityAdjustmentJourney,
    RequisitionCancellationJourney,
    RequisitionLifecycleJourney,
    StoreDashboardReader,
)
from loadtests.scenarios.suggestions import SuggestionLookupJourney, SuggestionMaintenanceJourney


class MixedWorkloadUser(HttpUser):
    """Realistic mixed workload.

    Requisitions (75%):
    - Full lifecycle: the bulk of the day's writes
    - Store screens: work queues and statistics polled by the store
    - Adjustments: occasional corrections
    - Cancellation: rare

    Suggestions (25%):
    - Lookups while sectors fill requisitions
    - Maintenance: weekly, by store keepers
    """

    wait_time = between(0.5, 3.0)
    tasks = {
        # Requisitions (75%)
        RequisitionLifecycleJourney: 8,
        StoreDashboardReader: 4,
        QuantityAdjustmentJourney: 2,
        RequisitionCancellationJourney: 1,
        # Suggestions (25%)
        SuggestionLookupJourney: 4,
        SuggestionMaintenanceJourney: 1,
    }

"""Well-known cluster action names referenced by the privilege catalog."""

CLUSTER_STATE = "cluster:monitor/state"
NODES_LIVENESS = "cluster:monitor/nodes/liveness"

HAS_PRIVILEGES = "cluster:admin/xpack/security/user/has_privileges"
INVALIDATE_TOKEN = "cluster:admin/xpack/security/token/invalidate"
REFRESH_TOKEN = "cluster:admin/xpack/security/token/refresh"

CREATE_SNAPSHOT = "cluster:admin/snapshot/create"
GET_SNAPSHOTS = "cluster:admin/snapshot/get"
SNAPSHOTS_STATUS = "cluster:admin/snapshot/status"
GET_REPOSITORIES = "cluster:admin/repository/get"

GET_LIFECYCLE = "cluster:admin/ilm/get"
GET_ILM_STATUS = "cluster:admin/ilm/operation_mode/get"

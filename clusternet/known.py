"""Well-known names, labels, annotations and timing defaults."""

from datetime import timedelta

# annotations
AUTO_UPDATE_ANNOTATION = "clusternet.io/autoupdate"
"""Prevents reconciliation of an object when set to "false"."""

FEED_PROTECTION_ANNOTATION = "apps.clusternet.io/feed-protection"
"""Carries a message explaining why an object is protected as a feed."""

# object names
NAME_PREFIX_FOR_CLUSTERNET_OBJECTS = "clusternet-"
CHILD_CLUSTER_SECRET_NAME = "child-cluster-deployer"
CLUSTER_APISERVER_URL_KEY = "apiserver-advertise-url"
CLUSTERNET_SYSTEM_NAMESPACE = "clusternet-system"
CLUSTERNET_APP_SA = "clusternet-app-deployer"

# finalizers
APP_FINALIZER = "apps.clusternet.io/finalizer"
FEED_PROTECTION_FINALIZER = "apps.clusternet.io/feed-protection"

# timing
DEFAULT_RESYNC = timedelta(hours=12)
DEFAULT_RETRY_PERIOD = timedelta(seconds=5)

CATEGORY = "clusternet.shadow"

# label keys
CLUSTER_REGISTERED_BY_LABEL = "clusters.clusternet.io/registered-by"
CLUSTER_ID_LABEL = "clusters.clusternet.io/cluster-id"
CLUSTER_NAME_LABEL = "clusters.clusternet.io/cluster-name"
CLUSTER_BOOTSTRAPPING_LABEL = "clusters.clusternet.io/bootstrapping"

OBJECT_CREATED_BY_LABEL = "clusternet.io/created-by"

CONFIG_GROUP_LABEL = "apps.clusternet.io/config.group"
CONFIG_VERSION_LABEL = "apps.clusternet.io/config.version"
CONFIG_KIND_LABEL = "apps.clusternet.io/config.kind"
CONFIG_NAME_LABEL = "apps.clusternet.io/config.name"
CONFIG_NAMESPACE_LABEL = "apps.clusternet.io/config.namespace"
CONFIG_UID_LABEL = "apps.clusternet.io/config.uid"

CONFIG_SUBSCRIPTION_UID_LABEL = "apps.clusternet.io/subs.uid"
CONFIG_SUBSCRIPTION_NAME_LABEL = "apps.clusternet.io/subs.name"
CONFIG_SUBSCRIPTION_NAMESPACE_LABEL = "apps.clusternet.io/subs.namespace"

# label values
CREDENTIALS_AUTO = "credentials-auto"
RBAC_DEFAULTS = "rbac-defaults"

CLUSTERNET_AGENT_NAME = "clusternet-agent"
CLUSTERNET_HUB_NAME = "clusternet-hub"
"""Static facts about the compose stack."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ContainerSpec:
    name: str
    label: str
    port: int


CONTAINERS = (
    ContainerSpec(name="Consensus Node", label="network-node", port=50211),
    ContainerSpec(name="Mirror Node", label="mirror-node-grpc", port=5600),
    ContainerSpec(name="Relay", label="json-rpc-relay", port=7546),
)

CONSENSUS_NODE_LABEL = "network-node"
MIRROR_NODE_LABEL = "mirror-node-rest"
RELAY_LABEL = "json-rpc-relay"
MIRROR_NODE_MONITOR = "mirror-node-monitor"
MIRROR_NODE_DB = "mirror-node-db"

CONSENSUS_NODE_PORT = 50211
MIRROR_NODE_GRPC_PORT = 5600

NECESSARY_PORTS = (5551, 8545, 5600, 5433, 50211, 8082, 6379)
OPTIONAL_PORTS = (7546, 8080, 3000)

UNKNOWN_VERSION = "Unknown"
MIN_COMPOSE_VERSION = (2, 12, 2)

FEES_FILE_NUM = 111
EXCHANGE_RATES_FILE_NUM = 112
TOPIC_CREATED_LOG_TEXT = "Created TOPIC entity"
IGNORED_LOG_FRAGMENT = " Transaction ID: 0.0.2-"

COMPOSE_FILE = "docker-compose.yml"
COMPOSE_EVM_FILE = "docker-compose.evm.yml"
NETWORK_LOGS_DIR = "network-logs"
RECORD_STREAMS_SUBDIR = ("network-logs", "node", "recordStreams", "record0.0.3")
BOOTSTRAP_PROPERTIES_PATH = ("compose-network", "network-node", "data", "config", "bootstrap.properties")
APPLICATION_CONFIG_DIR = ("compose-network", "network-node", "data", "config")
MIRROR_APPLICATION_PATH = ("compose-network", "mirror-node", "application.yml")
RECORD_PARSER_TEMP_DIR = ("record-parser", "temp")
RECORD_PARSER_COMMAND = ("bash", "/opt/hgcapp/recordParser/parse.sh")
PID_FILE_NAME = "local-node.pid"

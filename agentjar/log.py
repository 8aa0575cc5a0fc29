import logging

jar_logger = logging.getLogger("agentjar.jar")
internal_logger = logging.getLogger("agentjar.internal")

"""
Configuration du listener de lancements pump.fun
"""

import os
import json
import logging
from typing import Dict, Any

logger = logging.getLogger("config")

# Configuration par défaut
DEFAULT_CONFIG = {
    # RPC + subscription
    "HELIUS_API_KEY": "",
    "RPC_HTTP_ENDPOINT": "",
    "RPC_WEBSOCKET_ENDPOINT": "",
    "COMMITMENT": "processed",
    "RECONNECT_DELAY_SECONDS": 5,

    # Programs
    "PUMP_PROGRAM_ID": "6EF8rrecthR5Dkzon8NQtEhJk8u5EDiyo3G81TpKyz5J",
    "TOKEN_PROGRAM_ID": "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA",
    "ASSOCIATED_TOKEN_PROGRAM_ID": "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL",

    # Scoring
    "CONFIDENCE_THRESHOLD": 70,
    "NAME_DENYLIST": ["scam"],
    "REPUTABLE_MIN_LAMPORTS": 1_000_000_000,

    # Market data
    "BIRDEYE_API_KEY": "",
    "BIRDEYE_BASE_URL": "https://public-api.birdeye.so",
    "BIRDEYE_CHAIN": "solana",
    "MARKET_DATA_TIMEOUT_SECONDS": 10,

    # Notifier
    "ENABLE_TELEGRAM": False,
    "TELEGRAM_BOT_TOKEN": "",
    "TELEGRAM_CHAT_ID": "",

    # Pipeline
    "MAX_CONCURRENT_PIPELINES": 16,
    "PIPELINE_BACKLOG": 256,
    "STATS_REPORT_INTERVAL_SECONDS": 60,
    "PUSH_STATS_SUMMARY": False,
}

HELIUS_HTTP_URL = "https://mainnet.helius-rpc.com/?api-key={}"
HELIUS_WS_URL = "wss://mainnet.helius-rpc.com/?api-key={}"


def load_config(config_file: str = "config.json") -> Dict[str, Any]:
    """
    Charge la configuration depuis le fichier config.json
    Si le fichier n'existe pas, crée un fichier avec la configuration par défaut

    Returns:
        Dictionnaire de configuration
    """
    if os.environ.get("USE_ENV_CONFIG", "").lower() == "true":
        logger.info("Chargement de la configuration depuis les variables d'environnement")
        return load_config_from_env()

    if not os.path.exists(config_file):
        with open(config_file, "w") as f:
            json.dump(DEFAULT_CONFIG, f, indent=2)
        logger.info(f"Fichier de configuration créé: {config_file}")
        return dict(DEFAULT_CONFIG)

    try:
        with open(config_file, "r") as f:
            config = json.load(f)
        logger.info(f"Configuration chargée depuis: {config_file}")
    except (OSError, ValueError) as e:
        logger.error(f"Erreur lors du chargement de la configuration: {e}")
        logger.info("Utilisation de la configuration par défaut")
        return dict(DEFAULT_CONFIG)

    # Fusion avec les clés manquantes
    for key, value in DEFAULT_CONFIG.items():
        if key not in config:
            config[key] = value

    return config


def load_config_from_env() -> Dict[str, Any]:
    """
    Charge la configuration depuis les variables d'environnement

    Returns:
        Dictionnaire de configuration
    """
    config = {}

    for key, default_value in DEFAULT_CONFIG.items():
        env_value = os.environ.get(key)

        if env_value is None:
            config[key] = default_value
            continue

        try:
            config[key] = _parse_env_value(env_value, default_value)
        except ValueError as parse_err:
            logger.warning(f"Impossible de parser la variable d'env {key}: {parse_err}. Valeur par défaut utilisée.")
            config[key] = default_value

    return config


def _parse_env_value(env_value: str, default_value: Any) -> Any:
    # bool before int: bool is an int subclass
    if isinstance(default_value, bool):
        return env_value.lower() == "true"
    if isinstance(default_value, int):
        return int(env_value)
    if isinstance(default_value, float):
        return float(env_value)
    if isinstance(default_value, list):
        return [item.strip() for item in env_value.split(",") if item.strip()]
    return env_value


def rpc_http_endpoint(config: Dict[str, Any]) -> str:
    if config.get("RPC_HTTP_ENDPOINT"):
        return config["RPC_HTTP_ENDPOINT"]
    return HELIUS_HTTP_URL.format(config.get("HELIUS_API_KEY", ""))


def rpc_websocket_endpoint(config: Dict[str, Any]) -> str:
    if config.get("RPC_WEBSOCKET_ENDPOINT"):
        return config["RPC_WEBSOCKET_ENDPOINT"]
    return HELIUS_WS_URL.format(config.get("HELIUS_API_KEY", ""))

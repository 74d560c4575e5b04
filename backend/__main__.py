"""
Lancement local de l'API: python -m backend

PORT (8080), UVICORN_RELOAD ("1"/"true"/"yes") et LOG_LEVEL ("info") sont lus dans l'environnement.
Derrière un proxy, FORWARDED_ALLOW_IPS restreint les IP dont les en-têtes X-Forwarded-* sont acceptés.
"""
import logging
import os

import uvicorn

from backend.config import FORWARDED_ALLOW_IPS


def main() -> None:
    log_level = os.environ.get("LOG_LEVEL", "info").lower()
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "backend.app:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", 8080)),
        reload=os.environ.get("UVICORN_RELOAD", "").lower() in ("1", "true", "yes"),
        log_level=log_level,
        forwarded_allow_ips=",".join(FORWARDED_ALLOW_IPS),
    )


if __name__ == "__main__":
    main()

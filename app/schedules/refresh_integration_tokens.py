import const

from app.lib.logger import logger, org_logger


def _flag_for_reconnect(service, integration, log):
    try:
        service.refresh_needed(integration.organization_id, integration.id)
    except Exception as e:
        log.error(f"Could not flag integration {integration.id}: {e}")


def _refresh_one(service, integration, refresher):
    token = refresher(integration)
    if not token or not token.get("access_token"):
        return False

    service.create_or_update_integration(
        org=integration.organization_id,
        name=integration.name,
        picture=integration.picture,
        type=integration.type,
        internal_id=integration.internal_id,
        provider=integration.provider_identifier,
        token=token["access_token"],
        # providers with long-lived tokens send no new refresh token
        refresh_token=token.get("refresh_token") or integration.refresh_token or "",
        expires_in=token.get("expires_in", const.DEFAULT_EXPIRES_IN),
        username=integration.profile,
        refresh=integration.id,
    )
    return True


def refresh_integration_tokens(app, refreshers):
    """Refresh every integration whose token is about to expire.

    `refreshers` maps a provider identifier to a callable taking the
    integration and returning {"access_token", "refresh_token",
    "expires_in"}, or a falsy value when the provider refused.
    A failure on one integration flags it for reconnection and the
    batch moves on.
    """
    with app.app_context():
        service = app.extensions["integrations"]

        logger.info("---------------REFRESH INTEGRATION TOKENS-----------------")

        integrations = service.needs_to_be_refreshed()
        logger.info(f"Found {len(integrations)} integrations to refresh token")

        refreshed = 0
        for integration in integrations:
            log = org_logger(integration.organization_id)
            refresher = refreshers.get(integration.provider_identifier)
            if refresher is None:
                log.debug(
                    f"No refresher for {integration.provider_identifier}, skipping {integration.id}"
                )
                continue

            try:
                ok = _refresh_one(service, integration, refresher)
            except Exception as e:
                log.error(f"Refresh failed for integration {integration.id}: {e}")
                ok = False

            if ok:
                refreshed += 1
            else:
                _flag_for_reconnect(service, integration, log)

        logger.info(f"Refreshed {refreshed} integration tokens")
        return refreshed

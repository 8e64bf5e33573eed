from wardrobe_api.auth.gate import Principal


def allow(principal: Principal, target_owner_id: str) -> bool:
    if principal.is_admin:
        return True
    return principal.id is not None and str(principal.id) == str(target_owner_id)

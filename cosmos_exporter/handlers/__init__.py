from . import general, params, validator, validators, wallet

ENDPOINTS = {
    "/metrics/general": general.collect,
    "/metrics/validators": validators.collect,
    "/metrics/validator": validator.collect,
    "/metrics/wallet": wallet.collect,
    "/metrics/params": params.collect,
}

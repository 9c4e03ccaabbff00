"""Generate component definitions and schemas from CRDs, format titles and resolve references."""
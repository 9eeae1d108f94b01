from .line_protocol import (
    encode_measurements as encode_measurements,
    encode_batches as encode_batches,
    measurements_from_arrow as measurements_from_arrow,
)

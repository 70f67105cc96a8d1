"""
HTTP transport for the Jamf Pro API.

Provides:
- RequestEncoder: descriptor -> PreparedRequest (JSON, XML or form bodies)
- Dispatcher: executes requests, classifies status, decodes bodies
- Tag-based XML codec for the legacy JSSResource endpoints
"""

from jamfpro.transport.dispatcher import MAX_BODY_SLURP_SIZE, Dispatcher, Response
from jamfpro.transport.encoder import PreparedRequest, RequestDescriptor, RequestEncoder
from jamfpro.transport.xml_codec import decode_xml, encode_xml

__all__ = [
    "RequestDescriptor",
    "PreparedRequest",
    "RequestEncoder",
    "Dispatcher",
    "Response",
    "MAX_BODY_SLURP_SIZE",
    "encode_xml",
    "decode_xml",
]

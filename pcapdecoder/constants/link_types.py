# Link-layer header types, as stored in the Interface Description Block.
# Only used to describe an interface; packet contents are never dissected.

LINKTYPE_NULL = 0  # BSD loopback
LINKTYPE_ETHERNET = 1  # D/I/X and 802.3 Ethernet
LINKTYPE_AX25 = 3
LINKTYPE_TOKEN_RING = 6  # IEEE 802 Networks
LINKTYPE_ARCNET = 7
LINKTYPE_SLIP = 8
LINKTYPE_PPP = 9
LINKTYPE_FDDI = 10
LINKTYPE_PPP_HDLC = 50  # PPP in HDLC-like framing
LINKTYPE_PPP_ETHER = 51  # PPPoE
LINKTYPE_ATM_RFC1483 = 100
LINKTYPE_RAW = 101  # Raw IP
LINKTYPE_C_HDLC = 104  # Cisco HDLC
LINKTYPE_IEEE802_11 = 105
LINKTYPE_FRELAY = 107
LINKTYPE_LOOP = 108  # OpenBSD loopback
LINKTYPE_LINUX_SLL = 113  # Linux cooked capture
LINKTYPE_PFLOG = 117
LINKTYPE_IEEE802_11_RADIOTAP = 127
LINKTYPE_IPV4 = 228
LINKTYPE_IPV6 = 229
LINKTYPE_NFLOG = 239
LINKTYPE_USBPCAP = 249
LINKTYPE_LINUX_SLL2 = 276

LINKTYPE_DESCRIPTIONS = {
    LINKTYPE_NULL: "BSD loopback encapsulation",
    LINKTYPE_ETHERNET: "IEEE 802.3 Ethernet",
    LINKTYPE_AX25: "AX.25 packet",
    LINKTYPE_TOKEN_RING: "IEEE 802.5 Token Ring",
    LINKTYPE_ARCNET: "ARCNET Data Packets",
    LINKTYPE_SLIP: "SLIP, encapsulated with a LINKTYPE_SLIP header",
    LINKTYPE_PPP: "PPP, as per RFC 1661 and RFC 1662",
    LINKTYPE_FDDI: "FDDI, as specified by ANSI INCITS 239-1994",
    LINKTYPE_PPP_HDLC: "PPP in HDLC-like framing, as per RFC 1662",
    LINKTYPE_PPP_ETHER: "PPPoE",
    LINKTYPE_ATM_RFC1483: "RFC 1483 LLC/SNAP-encapsulated ATM",
    LINKTYPE_RAW: "Raw IP",
    LINKTYPE_C_HDLC: "Cisco PPP with HDLC framing",
    LINKTYPE_IEEE802_11: "IEEE 802.11 wireless LAN",
    LINKTYPE_FRELAY: "Frame Relay",
    LINKTYPE_LOOP: "OpenBSD loopback encapsulation",
    LINKTYPE_LINUX_SLL: "Linux \"cooked\" capture encapsulation",
    LINKTYPE_PFLOG: "OpenBSD pflog",
    LINKTYPE_IEEE802_11_RADIOTAP: "Radiotap link-layer information followed "
    "by an 802.11 header",
    LINKTYPE_IPV4: "Raw IPv4",
    LINKTYPE_IPV6: "Raw IPv6",
    LINKTYPE_NFLOG: "Linux netlink NETLINK NFLOG socket log messages",
    LINKTYPE_USBPCAP: "USB packets, beginning with a USBPcap header",
    LINKTYPE_LINUX_SLL2: "Linux \"cooked\" capture encapsulation v2",
}

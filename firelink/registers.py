"""Register map, flag masks and error codes of the Pozyx positioning shield."""

from __future__ import annotations

from enum import IntEnum, IntFlag

POZYX_I2C_ADDRESS = 0x4B
MAX_ANCHORS_IN_LIST = 20
MAX_BUF_SIZE = 100
WHO_AM_I_VALUE = 0x43

FEET_PER_METER = 3.2808399
INCH_PER_METER = 39.3700787

POS_DIV_MM = 1.0
PRESS_DIV_PA = 1000.0
ACCEL_DIV_MG = 1.0
GYRO_DIV_DPS = 16.0
MAG_DIV_UT = 16.0
EULER_DIV_DEG = 16.0
QUAT_DIV = 16384.0
TEMP_DIV_CELSIUS = 1.0


class Register(IntEnum):
    """Addresses of the Pozyx registers and register functions."""

    # Status registers
    WHO_AM_I = 0x00
    FIRMWARE_VER = 0x01
    HARDWARE_VER = 0x02
    ST_RESULT = 0x03
    ERRORCODE = 0x04
    INT_STATUS = 0x05
    CALIB_STATUS = 0x06

    # Configuration registers
    INT_MASK = 0x10
    INT_CONFIG = 0x11
    POS_FILTER = 0x14
    CONFIG_LEDS = 0x15
    POS_ALG = 0x16
    POS_NUM_ANCHORS = 0x17
    POS_INTERVAL = 0x18
    NETWORK_ID = 0x1A
    UWB_CHANNEL = 0x1C
    UWB_RATES = 0x1D
    UWB_PLEN = 0x1E
    UWB_GAIN = 0x1F
    UWB_XTALTRIM = 0x20
    RANGE_PROTOCOL = 0x21
    OPERATION_MODE = 0x22
    SENSORS_MODE = 0x23
    CONFIG_GPIO1 = 0x27
    CONFIG_GPIO2 = 0x28
    CONFIG_GPIO3 = 0x29
    CONFIG_GPIO4 = 0x2A

    # Positioning data
    POS_X = 0x30
    POS_Y = 0x34
    POS_Z = 0x38
    POS_ERR_X = 0x3C
    POS_ERR_Y = 0x3E
    POS_ERR_Z = 0x40
    POS_ERR_XY = 0x42
    POS_ERR_XZ = 0x44
    POS_ERR_YZ = 0x46

    MAX_LIN_ACC = 0x4E

    # Sensor data
    PRESSURE = 0x50
    ACCEL_X = 0x54
    ACCEL_Y = 0x56
    ACCEL_Z = 0x58
    MAGN_X = 0x5A
    MAGN_Y = 0x5C
    MAGN_Z = 0x5E
    GYRO_X = 0x60
    GYRO_Y = 0x62
    GYRO_Z = 0x64
    EUL_HEADING = 0x66
    EUL_ROLL = 0x68
    EUL_PITCH = 0x6A
    QUAT_W = 0x6C
    QUAT_X = 0x6E
    QUAT_Y = 0x70
    QUAT_Z = 0x72
    LIA_X = 0x74
    LIA_Y = 0x76
    LIA_Z = 0x78
    GRAV_X = 0x7A
    GRAV_Y = 0x7C
    GRAV_Z = 0x7E
    TEMPERATURE = 0x80

    # General data
    DEVICE_LIST_SIZE = 0x81
    RX_NETWORK_ID = 0x82
    RX_DATA_LEN = 0x84
    GPIO1 = 0x85
    GPIO2 = 0x86
    GPIO3 = 0x87
    GPIO4 = 0x88

    # Functions
    RESET_SYS = 0xB0
    LED_CTRL = 0xB1
    TX_DATA = 0xB2
    TX_SEND = 0xB3
    RX_DATA = 0xB4
    DO_RANGING = 0xB5
    DO_POSITIONING = 0xB6
    POS_SET_ANCHOR_IDS = 0xB7
    POS_GET_ANCHOR_IDS = 0xB8
    FLASH_RESET = 0xB9
    FLASH_SAVE = 0xBA
    FLASH_DETAILS = 0xBB

    # Device list functions
    DEVICES_GETIDS = 0xC0
    DEVICES_DISCOVER = 0xC1
    DEVICES_CALIBRATE = 0xC2
    DEVICES_CLEAR = 0xC3
    DEVICE_ADD = 0xC4
    DEVICE_GETINFO = 0xC5
    DEVICE_GETCOORDS = 0xC6
    DEVICE_GETRANGEINFO = 0xC7
    CIR_DATA = 0xC8


class InterruptStatus(IntFlag):
    """Bits of the interrupt status and interrupt mask registers."""

    ERR = 0x01
    POS = 0x02
    IMU = 0x04
    RX_DATA = 0x08
    FUNC = 0x10
    TDMA = 0x40
    PIN = 0x80

    @classmethod
    def all_events(cls) -> "InterruptStatus":
        """The mask that enables every event interrupt."""
        return cls.ERR | cls.POS | cls.IMU | cls.RX_DATA | cls.FUNC


class ErrorCode(IntEnum):
    """Values reported by the error-code register."""

    NONE = 0x00
    I2C_WRITE = 0x01
    I2C_CMDFULL = 0x02
    ANCHOR_ADD = 0x03
    COMM_QUEUE_FULL = 0x04
    I2C_READ = 0x05
    UWB_CONFIG = 0x06
    OPERATION_QUEUE_FULL = 0x07
    STARTUP_BUSFAULT = 0x08
    FLASH_INVALID = 0x09
    NOT_ENOUGH_ANCHORS = 0x0A
    DISCOVERY = 0x0B
    CALIBRATION = 0x0C
    FUNC_PARAM = 0x0D
    ANCHOR_NOT_FOUND = 0x0E
    FLASH = 0x0F
    MEMORY = 0x10
    RANGING = 0x11
    RTIMEOUT1 = 0x12
    RTIMEOUT2 = 0x13
    TXLATE = 0x14
    UWB_BUSY = 0x15
    POSALG = 0x16
    NOACK = 0x17
    TDMA = 0xA0
    SNIFF_OVERFLOW = 0xE0
    NO_PPS = 0xF0
    NEW_TASK = 0xF1
    UNRECDEV = 0xFE
    GENERAL = 0xFF


_READABLE_RANGES = (
    range(0x00, 0x07),
    range(0x10, 0x12),
    range(0x14, 0x24),
    range(0x27, 0x2B),
    range(0x30, 0x48),
    range(0x4E, 0x89),
)

_WRITABLE_RANGES = (
    range(0x10, 0x12),
    range(0x14, 0x24),
    range(0x27, 0x2B),
    range(0x30, 0x3C),
    range(0x85, 0x89),
)

_FUNCTION_RANGES = (
    range(0xB0, 0xBC),
    range(0xC0, 0xC9),
)


def _in_ranges(address: int, ranges: tuple[range, ...]) -> bool:
    return any(int(address) in r for r in ranges)


def is_reg_readable(address: int) -> bool:
    """Whether the register at ``address`` can be read."""
    return _in_ranges(address, _READABLE_RANGES)


def is_reg_writable(address: int) -> bool:
    """Whether the register at ``address`` can be written."""
    return _in_ranges(address, _WRITABLE_RANGES)


def is_function_call(address: int) -> bool:
    """Whether ``address`` names a register function rather than data."""
    return _in_ranges(address, _FUNCTION_RANGES)
import configparser
import os

RC_FILE_HELP = """\
Sample rcfile:
    [lint]
    command = pod spec lint {spec}  # {spec}=spec file, {name}=package name
    timeout = 1800  # seconds, default=no timeout
    [runner]
    workers = 8  # default=number of CPUs
    progress interval = 60  # seconds
    exit code = sum|count  # default=sum
    [catalog]
    file = ~/manifest.txt  # one package name per line, or a .json list
    unmatched = ignore|warn  # default=ignore
    [log]
    extension = .txt
    [prefs]
    bundle id = com.example.app
"""

DEFAULT_LINT_COMMAND = "pod spec lint {spec}"
DEFAULT_PROGRESS_INTERVAL = 60.0
DEFAULT_LOG_EXTENSION = ".txt"


class ConfigEnum(object):
    __slots__ = (
        'defaultName',
        '_enumVals',
    )

    def __init__(self, default, **enumVals):
        self._enumVals = enumVals
        assert default in enumVals
        self.defaultName = default
        for enumName in enumVals:
            assert enumName not in self.__slots__

    def values(self):
        return iter(self._enumVals.values())

    @property
    def defaultVal(self):
        return self._enumVals[self.defaultName]

    def __getattr__(self, attr):
        assert attr != '_enumVals'
        if attr in self._enumVals:
            return self._enumVals[attr]
        else:
            return object.__getattribute__(self, attr)


EXIT_CODE = ConfigEnum(
    'SUM',  # default
    SUM='sum',
    COUNT='count',
)

UNMATCHED = ConfigEnum(
    'IGNORE',  # default
    IGNORE='ignore',
    WARN='warn',
)


def _getConfig(cfgParser, section, option, defaultValue=None):
    if not cfgParser.has_section(section):
        return defaultValue
    if not cfgParser.has_option(section, option):
        return defaultValue
    return cfgParser.get(section, option)


def _getEnumConfig(cfgParser, section, option, enum):
    optionVal = _getConfig(
        cfgParser, section, option, enum.defaultVal)
    if optionVal not in list(enum.values()):
        raise ConfigError(
            "RC file has invalid \"{section}.{option}\" setting {optionVal}.  Valid "
            "options: {allowedVals}".format(
                section=section,
                option=option,
                optionVal=optionVal,
                allowedVals=", ".join(list(enum.values()))))

    return optionVal


def _getNumberConfig(cfgParser, section, option, default, kind=int):
    val = _getConfig(cfgParser, section, option, None)
    if val is None:
        return default
    try:
        num = kind(val)
    except ValueError:
        num = None
    if num is None or num <= 0:
        raise ConfigError(
            "RC file has invalid \"{section}.{option}\" setting {optionVal}.  "
            "Expecting a positive number".format(
                section=section,
                option=option,
                optionVal=val))
    return num


class ConfigError(Exception):
    pass


class Config(object):
    # pylint: disable=too-many-instance-attributes
    validConfig = {
        'lint': {'command', 'timeout'},
        'runner': {'workers', 'progress interval', 'exit code'},
        'catalog': {'file', 'unmatched'},
        'log': {'extension'},
        'prefs': {'bundle id'},
    }

    def _validateConfigParser(self, cfgParser):
        cfgSections = set(cfgParser.sections())
        unknownSections = cfgSections - set(self.validConfig.keys())
        if unknownSections:
            raise ConfigError(
                "RC file has unknown configuration sections: {}".format(
                    ", ".join(sorted(unknownSections))))
        for section in cfgSections:
            cfgValues = set(cfgParser.options(section))
            unknownOptions = cfgValues - self.validConfig[section]
            if unknownOptions:
                raise ConfigError(
                    "RC file has unknown configuration options in "
                    "section \"{}\": {}".format(
                        section, ", ".join(sorted(unknownOptions))))

    def __init__(self, options):
        stateDir = options.stateDir
        self.options = options
        self._logDir = os.path.expanduser(stateDir) + "/log/"
        self._prefsDir = os.path.expanduser(stateDir) + "/prefs/"

        rcFile = os.path.expanduser(options.rcFile)
        cfgParser = configparser.RawConfigParser()
        try:
            cfgParser.read(rcFile)
        except configparser.Error as error:
            raise ConfigError("RC file {} is malformed: {}".format(
                rcFile, error)) from error
        self._validateConfigParser(cfgParser)

        self._lintCommand = _getConfig(
            cfgParser, 'lint', 'command', DEFAULT_LINT_COMMAND)
        self._lintTimeout = _getNumberConfig(
            cfgParser, 'lint', 'timeout', None, kind=float)
        self._workers = _getNumberConfig(cfgParser, 'runner', 'workers', None)
        self._progressInterval = _getNumberConfig(
            cfgParser, 'runner', 'progress interval',
            DEFAULT_PROGRESS_INTERVAL, kind=float)
        self._exitCode = _getEnumConfig(
            cfgParser, 'runner', 'exit code', EXIT_CODE)
        self._catalogFile = _getConfig(cfgParser, 'catalog', 'file', None)
        self._unmatched = _getEnumConfig(
            cfgParser, 'catalog', 'unmatched', UNMATCHED)
        self._logExtension = _getConfig(
            cfgParser, 'log', 'extension', DEFAULT_LOG_EXTENSION)
        self._bundleId = _getConfig(cfgParser, 'prefs', 'bundle id', "")

    def _option(self, name):
        return getattr(self.options, name, None)

    @property
    def verbose(self):
        return self.options.verbose

    @staticmethod
    def checkDir(dirName):
        if not os.access(dirName, os.W_OK | os.X_OK | os.R_OK):
            os.makedirs(dirName)
        return dirName

    @property
    def logDir(self):
        return self.checkDir(self._logDir)

    @property
    def prefsDir(self):
        return self.checkDir(self._prefsDir)

    @property
    def lintCommand(self):
        return self._option('lintCommand') or self._lintCommand

    @property
    def lintTimeout(self):
        timeout = self._option('timeout')
        return timeout if timeout is not None else self._lintTimeout

    @property
    def workers(self):
        workers = self._option('jobs')
        return workers if workers is not None else self._workers

    @property
    def progressInterval(self):
        interval = self._option('progressInterval')
        return interval if interval is not None else self._progressInterval

    @property
    def exitCodeCount(self):
        return self._exitCode == EXIT_CODE.COUNT

    @property
    def catalogFile(self):
        catalogFile = self._option('catalog') or self._catalogFile
        return os.path.expanduser(catalogFile) if catalogFile else None

    @property
    def warnUnmatched(self):
        return self._unmatched == UNMATCHED.WARN

    @property
    def logExtension(self):
        return self._logExtension

    @property
    def bundleId(self):
        return self._bundleId

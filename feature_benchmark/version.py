"""版本信息管理"""

VERSION_INFO = {
    'major': 1,
    'minor': 0,
    'patch': 0,
    'status': 'stable'  # dev, alpha, beta, rc, stable
}

__version__ = f"{VERSION_INFO['major']}.{VERSION_INFO['minor']}.{VERSION_INFO['patch']}"

def get_version_info():
    """版本信息副本，写入评测摘要"""
    info = dict(VERSION_INFO)
    info['version'] = __version__
    return info

#!/usr/bin/python
#-*-coding: utf-8 -*-

"""
Lecture des parametres par defaut du noyau de segments.

Format : cle=valeur, une par ligne. Les lignes commencant par # sont ignorees.
Les types sont inferes automatiquement (bool, int, float, str).

Le fichier ``defaults_segment.cfg`` livre avec le package fixe la taille
de la LUT, le rayon de tolerance de ``on()``, le pas de raffinement de la
projection et les parametres de l'echantillonnage adaptatif.

@author: Nervures
@date: 2026-02
"""

import os
import logging

logger = logging.getLogger(__name__)

# Valeurs de repli si le fichier de defauts est absent
BUILTIN_DEFAULTS = {
    'lut_size': 100,
    'on_error': 5.0,
    'projection_step': 0.1,
    'flatten_tolerance': 0.01,
    'flatten_max_depth': 16,
}


def _parse_value(value_str):
    """Infere le type d'une valeur depuis sa representation texte.

    :param value_str: valeur brute lue depuis le fichier
    :type value_str: str
    :returns: valeur typee (bool, int, float ou str)
    """
    s = value_str.strip()
    if s.lower() in ('true', 'yes', 'on'):
        return True
    if s.lower() in ('false', 'no', 'off'):
        return False
    try:
        return int(s)
    except ValueError:
        pass
    try:
        return float(s)
    except ValueError:
        pass
    return s


def load_config(filepath):
    """Charge un fichier de configuration cle=valeur.

    :param filepath: chemin du fichier .cfg
    :type filepath: str
    :returns: dictionnaire des parametres
    :rtype: dict
    :raises IOError: si le fichier n'existe pas
    """
    if not os.path.isfile(filepath):
        raise IOError("Fichier de configuration introuvable : %s" % filepath)
    params = {}
    with open(filepath, 'r') as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            if '=' not in line:
                logger.warning("Ligne ignoree dans %s : %r", filepath, line)
                continue
            key, value = line.split('=', 1)
            params[key.strip()] = _parse_value(value)
    return params


def load_defaults(name='segment'):
    """Charge les parametres par defaut d'un composant.

    Cherche le fichier defaults_<name>.cfg dans le meme repertoire.
    Les cles absentes du fichier sont completees par BUILTIN_DEFAULTS.

    :param name: nom du composant (ex: 'segment')
    :type name: str
    :returns: parametres par defaut
    :rtype: dict
    """
    cfg_dir = os.path.dirname(os.path.abspath(__file__))
    cfg_file = os.path.join(cfg_dir, 'defaults_%s.cfg' % name)
    try:
        params = load_config(cfg_file)
    except IOError:
        logger.warning("Defauts %s introuvables, valeurs integrees utilisees",
                       cfg_file)
        params = {}
    return merge_params(BUILTIN_DEFAULTS, params)


def merge_params(defaults, user_params):
    """Fusionne les parametres utilisateur avec les defauts.

    Les parametres utilisateur surchargent les defauts.

    :param defaults: parametres par defaut
    :type defaults: dict
    :param user_params: parametres utilisateur (peuvent etre None)
    :type user_params: dict or None
    :returns: parametres fusionnes
    :rtype: dict
    """
    merged = dict(defaults)
    if user_params:
        for key, value in user_params.items():
            merged[key] = value
    return merged
